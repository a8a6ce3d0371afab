# logs.py


def safe_log(cb, msg):
    # a broken log sink must not stop generation
    if cb:
        try:
            cb(msg)
        except Exception:
            pass
