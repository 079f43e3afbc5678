"""MoodMate journaling API."""
