"""HTTP surface for the Matchday flow service."""
