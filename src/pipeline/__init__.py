"""Generation pipeline: analysis, planning, synthesis, orchestration."""
