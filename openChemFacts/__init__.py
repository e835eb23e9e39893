"""Django project package for the OpenChemFacts dashboard."""
