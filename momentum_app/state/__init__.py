"""
Routine run state machine.

Holds the per-run state and the components that move it: the countdown
timer (IDLE → RUNNING → OVERRUN, with PAUSED from either live phase), the
schedule drift accumulator, the task sequencer and the suspension
reconciler.
"""
