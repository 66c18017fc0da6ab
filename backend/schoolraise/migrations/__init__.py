"""
Idempotent database migration scripts.

Each script inspects the catalog before changing it and can be run any number
of times. Run them with `schoolraise-migrate <script>` or
`python -m schoolraise.migrations <script>`.
"""
