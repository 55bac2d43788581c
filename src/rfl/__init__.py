"""RFL 90' lineup builder: formation slots, auto-fill and saved lineups."""

__version__ = "0.1.0"
