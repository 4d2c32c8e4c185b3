from colorama import init, Fore, Style

# Initialize colorama
init(autoreset=True)

LEVEL_COLORS = {
    'SUCCESS': Fore.GREEN,
    'ERROR': Fore.RED,
    'WARN': Fore.YELLOW,
    'INFO': Fore.BLUE,
}


def log(level, msg):
    color = LEVEL_COLORS.get(level, '')
    print(f"{color}[{level}]{Style.RESET_ALL} {msg}")


def warn(msg):
    log('WARN', msg)
