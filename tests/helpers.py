from __future__ import annotations

SECRET = "test-secret"
ORGANIZER_ID = 1
WORKER_ONE_JOB = 10
WORKER_TWO_JOBS = 11
OUTSIDER = 99


class RecordingNotifier:
    def __init__(self):
        self.calls = []

    def notify(self, worker_ids, notification):
        recipients = sorted(set(worker_ids))
        self.calls.append((recipients, notification))
        return len(recipients)
