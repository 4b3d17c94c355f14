"""Sample usage of retryable: poll a flaky endpoint and cancel after a deadline"""

import random
import threading
import time

from retryable import retry


def poll_api():
    """Pretend to poll an API that is slow or failing most of the time"""
    time.sleep(random.uniform(0.0, 0.3))
    if random.random() < 0.7:
        raise ConnectionError("service unavailable")
    return {"status": "ok"}


if __name__ == "__main__":
    rt = retry(poll_api).with_timeout(0.2).with_delay(0.1).with_max_attempts(10)

    # Cancel the whole run after two seconds, from another thread
    threading.Timer(2.0, rt.cancel).start()

    stats = rt.run()
    print(stats.summary())
    print(f"result: {stats.result}")
