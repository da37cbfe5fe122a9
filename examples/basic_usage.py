"""
Example: Basic usage of the gopop client
========================================

Creates a database from a migration, writes and reads a row, then drops it.
"""

from pathlib import Path

from gopop import Connection, DatabaseAlreadyExists, DatabaseNotFound

MIGRATION = Path(__file__).with_name("001_init.sql")


def example_lifecycle():
    """Full database lifecycle against an explicit service URL."""
    with Connection("USER", "PASSWORD", url="http://localhost:8080") as conn:
        try:
            print(conn.create("demo", MIGRATION).message)
        except DatabaseAlreadyExists:
            print("demo already exists, reusing it")

        conn.exec("demo", "INSERT INTO notes(id, body) VALUES (?, ?)", 1, "hello")
        print(conn.query("demo", "SELECT body FROM notes WHERE id = ?", 1).message)
        print(conn.get("demo").message)

        conn.drop("demo")


def example_environment():
    """Using GOPOP_URL, GOPOP_USER and GOPOP_PASS from the environment."""
    conn = Connection()
    try:
        print(conn.get("demo").message)
    except DatabaseNotFound:
        print("demo does not exist")
    finally:
        conn.close()


if __name__ == "__main__":
    # Uncomment the example you want to run
    # example_lifecycle()
    # example_environment()

    print("Set up your environment variables and uncomment an example to run.")
    print("Required: GOPOP_URL, GOPOP_USER, GOPOP_PASS")
