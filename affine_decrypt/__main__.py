from affine_decrypt.cli import main

raise SystemExit(main())
