# speciesfill/__main__.py
from speciesfill.cli import main

main()
