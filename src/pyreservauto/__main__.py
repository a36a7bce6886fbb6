"""Allow ``python -m pyreservauto``."""

from pyreservauto.cli import main

raise SystemExit(main())
