import threading
import time

import schedule

from infrastructure.logging import bind_request_context, get_module_logger
from modules.messaging.providers import get_attendance_monitor, get_reminder_jobs

logger = get_module_logger()


def safe_run(job):
    def wrapper(*args, **kwargs):
        with bind_request_context(job=job.__name__):
            try:
                job(*args, **kwargs)
            except Exception as e:
                logger.error(
                    "scheduled_job_failed",
                    job=job.__name__,
                    error=str(e),
                    exc_info=True,
                )

    return wrapper


def init():
    logger.info("scheduled_tasks_initialized")

    jobs = get_reminder_jobs()
    schedule.every(5).minutes.do(safe_run(scheduler_heartbeat))
    schedule.every().hour.do(safe_run(jobs.send_gathering_reminders))
    schedule.every().hour.do(safe_run(jobs.send_event_reminders))
    schedule.every(30).minutes.do(safe_run(jobs.escalate_overdue_visitors))
    schedule.every().hour.do(safe_run(get_attendance_monitor().check_recent_gatherings))


def scheduler_heartbeat():
    logger.info("scheduler_heartbeat", time=time.ctime())


def run_continuously(interval=1):
    """Continuously run, while executing pending jobs at each
    elapsed time interval.
    @return cease_continuous_run: threading. Event which can
    be set to cease continuous run. Please note that it is
    *intended behavior that run_continuously() does not run
    missed jobs*. For example, if you've registered a job that
    should run every minute and you set a continuous run
    interval of one hour then your job won't be run 60 times
    at each interval but only once.
    """
    cease_continuous_run = threading.Event()

    class ScheduleThread(threading.Thread):
        @classmethod
        def run(cls):
            while not cease_continuous_run.is_set():
                schedule.run_pending()
                time.sleep(interval)

    continuous_thread = ScheduleThread()
    continuous_thread.start()
    return cease_continuous_run
