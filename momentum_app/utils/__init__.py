"""
Utility functions module.

Wall-clock helpers and display formatting shared across the runner.

Time Semantics:
- All countdown arithmetic uses wall-clock instants, never tick counts
- Ticks do not fire while the host is suspended, so gaps are measured
  between two wall-clock readings
- Instants are timezone-aware UTC datetimes
"""
