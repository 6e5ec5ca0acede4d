"""Engine: selection, planning, execution, completeness and coverage."""
