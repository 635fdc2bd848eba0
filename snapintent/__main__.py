from snapintent.cli import main

raise SystemExit(main())
