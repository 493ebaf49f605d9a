"""
Safari Sync Server Backend
==========================

This is the Python package for the sync backend.

HOW IT'S ORGANIZED:
------------------
- models/    = Data structures (what does a sighting look like?)
- services/  = Workers (store, merge, sync, reports)
- routers/   = API endpoints (the doors into our app)
- config.py  = Settings from the environment / .env
- main.py    = Puts it all together and starts the server

Author: Safari Tracker Team
"""
