"""beamtrack — sensor-track management and intercept guidance for a 2D arena agent."""

__version__ = "0.1.0"
