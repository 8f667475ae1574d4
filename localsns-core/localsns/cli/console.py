from rich.console import Console

BANNER = r"""
    __                     __   _____ _   _______
   / /   ____  _________ _/ /  / ___// | / / ___/
  / /   / __ \/ ___/ __ `/ /   \__ \/  |/ /\__ \
 / /___/ /_/ / /__/ /_/ / /   ___/ / /|  /___/ /
/_____/\____/\___/\__,_/_/   /____/_/ |_//____/

"""

console = Console()
