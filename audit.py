import os
import re
from collections import namedtuple
from pathlib import Path
from urllib.parse import unquote

from bs4 import BeautifulSoup

from buildlog import log

BrokenLink = namedtuple('BrokenLink', ['page', 'link'])

# scheme:... (http:, mailto:, data:, tel:, javascript:) or protocol-relative //host
ABSOLUTE_RE = re.compile(r'^(?:[a-zA-Z][a-zA-Z0-9+.\-]*:|//)')
LINK_ATTRS = ('href', 'src')


def is_internal(link):
    if not link or link.startswith(('#', '?')):
        return False
    return not ABSOLUTE_RE.match(link)


class LinkAudit:
    """Reports internal href/src references of built pages that point nowhere."""

    def __init__(self, root_dir):
        self.root_dir = Path(root_dir)
        self.files_to_audit = []
        self.broken_links = []

    def collect_files(self):
        self.files_to_audit = sorted(self.root_dir.glob('*.html'))
        log('INFO', f"Found {len(self.files_to_audit)} HTML files to audit.")

    def iter_links(self, soup):
        for tag in soup.find_all(True):
            for attr in LINK_ATTRS:
                value = tag.get(attr)
                if isinstance(value, str):
                    yield value.strip()

    def resolve_local_path(self, current_file, link):
        """
        Resolves an internal link to a file in the output.
        Returns: (absolute_path_on_disk, is_found)
        """
        # Remove query params and anchors
        clean_href = unquote(link.split('?')[0].split('#')[0])
        if clean_href.endswith('/'):
            clean_href += 'index.html'

        if clean_href.startswith('/'):
            target_path = self.root_dir / clean_href.lstrip('/')
        else:
            target_path = current_file.parent / clean_href

        target_path = Path(os.path.normpath(target_path))
        return target_path, target_path.is_file()

    def audit_file(self, file_path):
        with open(file_path, 'r', encoding='utf-8') as f:
            soup = BeautifulSoup(f, 'html.parser')

        for link in self.iter_links(soup):
            if not is_internal(link):
                continue
            _, found = self.resolve_local_path(file_path, link)
            if not found:
                broken = BrokenLink(file_path.name, link)
                self.broken_links.append(broken)
                log('WARN', f"Broken link in {broken.page}: '{broken.link}' does not exist.")

    def run(self):
        self.broken_links = []
        self.collect_files()
        for file_path in self.files_to_audit:
            self.audit_file(file_path)

        if not self.broken_links:
            log('SUCCESS', "All internal links validated successfully.")
        return self.broken_links


def validate_links(root_dir):
    return LinkAudit(root_dir).run()
