"""
Personalized baselining modules.

This package contains modules for calculating personal baselines from a window
of daily records, which helps contextualize today's metrics against a user's
typical values.
"""
