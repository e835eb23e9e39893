"""Chart description building, reconciliation and rendering helpers.

The series builder turns EC10eq datasets into plotly chart descriptions, the
reconciler merges upstream chart descriptions with presentation defaults, and
the surface manages the render/purge lifecycle of a displayed chart.
"""
