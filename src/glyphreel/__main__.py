from glyphreel.cli import main

raise SystemExit(main())
