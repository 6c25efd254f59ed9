"""Mobile - reminder delivery and side reports

Design Principles:
    1. One plan at a time - scheduling a new batch cancels the old one
    2. Tone follows confidence - urgent wording only when the model is sure
    3. Reports are best-effort - a failed telemetry call never blocks a reminder

Components:
    scheduler.py: Turn a forecast batch into scheduled notifications
    telemetry.py: Fire-and-forget usage events
"""
