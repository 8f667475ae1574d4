import time


def poll_condition(condition, timeout: float = None, interval: float = 0.5) -> bool:
    """
    Calls ``condition`` every ``interval`` seconds until it returns a truthy value.

    :return: True once the condition holds, False if it still did not after ``timeout`` seconds
    """
    deadline = None if timeout is None else time.monotonic() + timeout
    while not condition():
        if deadline is not None and time.monotonic() >= deadline:
            return False
        time.sleep(interval)
    return True
