#!/usr/bin/env python3
"""
PocketDB - An in-memory relational data store
Entry point script

Run the REPL:
    python -m pocketdb

Or use as a library:
    from pocketdb import Database
    db = Database()
    db.execute("CREATE TABLE pets (id int, name text)")
"""

from pocketdb.core.repl import main

if __name__ == '__main__':
    main()
