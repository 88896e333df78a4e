import os
import sys
import argparse
from functools import reduce
from types import MappingProxyType
from colorama import init, Fore

from elm_manifest import load_manifest

GREENWOOD_URL = os.getenv("ELM_GREENWOOD_URL", "https://elm-greenwood.com").rstrip("/")
MANIFEST_PATH = "elm.json"
USAGE = "Usage: elm-deps-rss [path/to/elm.json]"

RELEASES = ("last", "first", "major", "minor", "patch")
OPTIONS = ("--release", "--verbose")


def log_info(message):
    print(Fore.BLUE + message, flush=True)

def log_warning(message):
    print(Fore.YELLOW + message, flush=True)

def log_error(message):
    print(Fore.RED + message, flush=True)

def usage():
    print(USAGE, flush=True)
    sys.exit(1)


def _add_package(query_map, dep):
    names = query_map.get(dep.author, ()) + (dep.name,)
    return {**query_map, dep.author: names}

def group_by_author(dependencies):
    """Fold dependencies into an ordered, read-only author -> package names mapping."""
    return MappingProxyType(reduce(_add_package, dependencies, {}))

def build_query(query_map):
    return "&".join(f"{author}={'+'.join(names)}" for author, names in query_map.items())

def parse_query(query):
    query_map = {}
    for segment in filter(None, query.split("&")):
        author, names = segment.split("=", 1)
        query_map[author] = tuple(names.split("+"))
    return query_map

def feed_links(query, release=None):
    base = GREENWOOD_URL
    if release is not None:
        if release not in RELEASES:
            raise ValueError(f"Unknown release filter: {release}")
        base = f"{base}/{release}"
    return f"{base}?{query}", f"{base}/.rss?{query}"

def print_feeds(web_url, rss_url):
    print("Web feed:")
    print(web_url)
    print("\nRSS feed:")
    print(rss_url, flush=True)


def _split_manifest_path(argv):
    # the first argument is the manifest path unless it is one of our options
    if argv and not argv[0].startswith(OPTIONS):
        return argv[0], argv[1:]
    return None, argv

def main(argv=None):
    argv = sys.argv[1:] if argv is None else list(argv)
    if argv and argv[0] in ("--help", "-h"):
        usage()

    parser = argparse.ArgumentParser(prog="elm-deps-rss", usage=USAGE[len("Usage: "):], add_help=False)
    parser.add_argument("elm_json", nargs="?", default=MANIFEST_PATH, help="Path to elm.json")
    parser.add_argument("--release", choices=RELEASES, help="Only follow a given kind of release")
    parser.add_argument("--verbose", action="store_true", help="More verbose output")
    elm_json, argv = _split_manifest_path(argv)
    args, ignored = parser.parse_known_args(argv)
    if elm_json is None:
        elm_json = args.elm_json
    elif args.elm_json != MANIFEST_PATH:
        ignored.insert(0, args.elm_json)

    if not os.path.exists(elm_json):
        print(f"{elm_json} file not found\n", flush=True)
        usage()

    manifest = load_manifest(elm_json)
    dependencies = manifest.dependencies()
    query_map = group_by_author(dependencies)

    if args.verbose:
        if ignored:
            log_warning(f"Ignoring extra arguments: {' '.join(ignored)}")
        log_info(f"Read {manifest.type.value} manifest {elm_json}")
        for dep in dependencies:
            log_info(f" - {dep}")
        log_info(f"Found {len(dependencies)} dependencies from {len(query_map)} authors.")
        if not dependencies:
            log_warning("No dependencies declared, feeds will list every package.")

    web_url, rss_url = feed_links(build_query(query_map), release=args.release)
    print_feeds(web_url, rss_url)


def run():
    init(autoreset=True)
    try:
        main()
    except Exception as e:
        log_error(f"Unexpected error occurred: {e}")
        sys.exit(1)


if __name__ == "__main__":
    run()
