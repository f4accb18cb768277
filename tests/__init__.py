"""Tests for DayTrack."""
