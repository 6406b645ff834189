from yamlrun.main import main

raise SystemExit(main())
