from jokes_viewer.terminal import main

raise SystemExit(main())
