"""Routing — first-match-wins route table with middleware-compiled snapshots.

Routes are appended per HTTP method at registration time. Every
mutation rebuilds an immutable compiled table that the dispatcher
reads; nothing is resolved per request.
"""
