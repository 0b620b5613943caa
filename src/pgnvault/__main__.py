from pgnvault.cli import main

raise SystemExit(main())
