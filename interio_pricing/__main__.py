"""Allow running as: python -m interio_pricing"""

import sys

from interio_pricing.main import main

if __name__ == "__main__":
    sys.exit(main())
