"""
Contracts (data models).

This folder defines the shapes exchanged between the lead funnel's pieces:
- Lead contact / answers / request metadata sent to the persistence webhook
- The `{ok, error}` envelope returned to the wizard
- Notification outcomes produced by the email dispatcher

Both the server pipeline and the client-side wizard should use these contracts
instead of passing ad-hoc dicts around.
"""
