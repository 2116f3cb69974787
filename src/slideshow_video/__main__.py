import sys

from slideshow_video.cli import main


sys.exit(main())
