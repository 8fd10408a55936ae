from font_grabber.cli import main

raise SystemExit(main())
