import logging

logger = logging.getLogger("securesum.audit")


def log_event(kind, party, detail):
    # counts and x-coordinates only; never secrets or y-values
    logger.info("%s | party=%s | %s", kind, "-" if party is None else party, detail)
