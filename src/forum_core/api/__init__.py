"""HTTP surface of the forum engine."""
