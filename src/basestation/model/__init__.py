"""
Value types shared by the decoded messages, and JSON serialization for those messages. Example:

    message = decode("MSG,3,...")
    model.json.dumps(message)

This is equivalent to:

    json.dumps(message, default=<private serialization function>, allow_nan=False, separators=(",", ":"))
"""
