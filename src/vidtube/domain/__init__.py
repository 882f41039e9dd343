"""Domain layer for VidTube: error taxonomy and business services."""
