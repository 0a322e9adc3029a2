"""TestGrid: provision, deploy, run test scenarios and tear down."""

__version__ = "0.1.0"
