"""Prime-field matrices with fixed-point encoding, activations, stacking, sharing and wire formats."""

__version__ = "0.1.0"
__all__ = ["activations", "field", "matrix", "sharing", "stacking", "wire"]