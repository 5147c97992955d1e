from imfilter.cli import main

raise SystemExit(main())
