"""Allow ``python -m create_rando_app``."""

from create_rando_app.pipeline import main

main()
