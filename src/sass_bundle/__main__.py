from sass_bundle.cli import main

raise SystemExit(main())
