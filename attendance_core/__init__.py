"""Attendance and overtime computation from biometric punches."""
