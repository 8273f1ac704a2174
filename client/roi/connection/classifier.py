from roi.connection.types import Classification


def classify(status_code: int) -> Classification:
    """Label a response by its status code.

    Args:
        status_code: HTTP status code of the response

    Returns:
        Classification: REDIRECT for 3xx, FAILURE for 400 and above,
                        SUCCESS for everything else
    """
    if 300 <= status_code < 400:
        return Classification.REDIRECT
    if status_code >= 400:
        return Classification.FAILURE
    return Classification.SUCCESS
