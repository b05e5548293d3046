"""
Real HTTP integration clients.

- apps_script_webhook: the spreadsheet webhook that stores each lead
- lead_api: the wizard's client for this service's own `POST /api/lead`
"""
