"""Text engine components: detection, reading, matching, display and writing."""
