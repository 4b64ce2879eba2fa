from .loop import RenderScheduler, SchedulerState, run_tick_loop
