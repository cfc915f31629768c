# lendify/tasks/scheduler.py
import atexit
import os

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger


def start_scheduler(app):
    """
    Starts the loan reminder job in a background scheduler.
    - The job runs inside an app context (it needs the db session).
    - With the debug reloader only the real process starts it.
    - SCHEDULER_ENABLED=0 turns it off (tests, one-off CLI runs).
    """
    if not app.config.get("SCHEDULER_ENABLED", True):
        app.logger.info("[scheduler] disabled by config.")
        return None

    # the Werkzeug reloader runs two processes; WERKZEUG_RUN_MAIN=true marks the real one
    if app.debug and os.environ.get("WERKZEUG_RUN_MAIN") != "true":
        app.logger.info("[scheduler] Debug reloader secondary process: scheduler skipped.")
        return None

    # imported here to avoid a circular import through the services
    from lendify.tasks.loan_reminders import run_loan_reminder_job

    scheduler = BackgroundScheduler(timezone="UTC")

    def _job_wrapper():
        with app.app_context():
            try:
                run_loan_reminder_job()
            except Exception as ex:
                app.logger.exception(f"[scheduler] loan_reminder_job error: {ex}")

    minutes = app.config["REMINDER_INTERVAL_MINUTES"]
    scheduler.add_job(
        func=_job_wrapper,
        trigger=IntervalTrigger(minutes=minutes),
        id="loan_reminder_job",
        replace_existing=True,
        max_instances=1,        # never overlap runs
        coalesce=True,          # collapse missed runs into one
        misfire_grace_time=120
    )

    scheduler.start()
    app.logger.info(f"[scheduler] Loan reminder job started (every {minutes} minutes).")

    app.extensions["apscheduler"] = scheduler
    atexit.register(lambda: scheduler.shutdown(wait=False))
    return scheduler
