import os
import re
import shutil
import time
from dataclasses import dataclass, field
from pathlib import Path

from audit import validate_links
from css_bundle import compile_bundle
from partials import inject_content, load_content, load_partials
from sitemap import write_robots, write_sitemap

# Configuration
DOMAIN = "https://fedrev.co"

# Marker comment in the page shell -> resolved section
SECTION_MARKERS = [
    ('HEAD', 'head'),
    ('HEADER', 'header'),
    ('HERO SECTION', 'hero'),
    ('ABOUT SECTION', 'about'),
    ('SERVICES SECTION', 'services'),
    ('CONTACT SECTION', 'contact'),
    ('FOOTER', 'footer'),
]
UNHASHED_CSS = '/css/bundle.css'


@dataclass
class BuildConfig:
    src_dir: Path
    out_dir: Path
    assets_dir: Path
    partials_dir: Path
    content_path: Path
    base_url: str = DOMAIN
    css_entry: str = 'main.css'
    asset_folders: dict = field(default_factory=lambda: {'js': 'js', 'img': 'img', 'icons': 'icons'})
    strip_prefix: str = '/public/'

    @classmethod
    def from_root(cls, root, base_url=DOMAIN, **overrides):
        root = Path(root)
        src_dir = root / 'src'
        assets_dir = src_dir / 'assets'
        return cls(
            src_dir=src_dir,
            out_dir=root / 'public',
            assets_dir=assets_dir,
            partials_dir=src_dir / 'partials',
            content_path=assets_dir / 'content' / 'copy.json',
            base_url=base_url,
            **overrides,
        )


def minify_html(html):
    """Remove comments, whitespace between tags and newlines."""
    html = re.sub(r'<!--[\s\S]*?-->', '', html)
    html = re.sub(r'>\s+<', '><', html)
    html = re.sub(r'\s{2,}', ' ', html)
    html = re.sub(r'^\s+|\s+$', '', html, flags=re.MULTILINE)
    html = re.sub(r'\n+', '', html)
    return html.strip()


def assemble_page(shell, sections, css_filename, strip_prefix='/public/'):
    html = shell
    for marker, key in SECTION_MARKERS:
        html = html.replace(f"<!-- {marker} -->", sections[key], 1)
    html = html.replace(UNHASHED_CSS, f"/css/{css_filename}", 1)
    # Authoring links point into the output folder, the deployed site is rooted at it
    if strip_prefix:
        html = html.replace(strip_prefix, '/')
    return html


def copy_folder(src, dest):
    shutil.copytree(src, dest, dirs_exist_ok=True)


def time_operation(name, fn, *args, **kwargs):
    start = time.perf_counter()
    result = fn(*args, **kwargs)
    ms = (time.perf_counter() - start) * 1000
    print(f"⏱️ {name} took {ms:.2f} ms")
    return result


def log_file_size(path):
    size_kb = os.path.getsize(path) / 1024
    print(f"📦 {os.path.basename(path)} size: {size_kb:.2f} KB")
    return size_kb


class SiteBuilder:
    def __init__(self, config):
        self.config = config
        self.css_filename = None
        self.sections = {}
        self.pages = []
        self.broken_links = []

    def run(self):
        print("🚀 Starting build process...")
        self.prepare_output()
        time_operation("CSS bundling", self.bundle_css)
        self.copy_assets()
        self.inject_content()
        time_operation("HTML build", self.build_pages)
        self.generate_sitemap()
        self.broken_links = validate_links(self.config.out_dir)
        log_file_size(os.path.join(self.config.out_dir, 'css', self.css_filename))
        print("🎉 Static site build complete!")
        return self.broken_links

    def prepare_output(self):
        out_dir = self.config.out_dir
        if os.path.exists(out_dir):
            shutil.rmtree(out_dir)
            print("🧹 Removed stale public directory")
        os.makedirs(out_dir)
        print("📁 Created public directory")

    def bundle_css(self):
        entry = os.path.join(self.config.assets_dir, 'css', self.config.css_entry)
        self.css_filename = compile_bundle(entry, os.path.join(self.config.out_dir, 'css'))
        return self.css_filename

    def copy_assets(self):
        for src_name, dest_name in self.config.asset_folders.items():
            copy_folder(
                os.path.join(self.config.assets_dir, src_name),
                os.path.join(self.config.out_dir, dest_name),
            )
            print(f"📂 Copied asset folder: {src_name} → {dest_name}")

    def inject_content(self):
        partials = load_partials(self.config.partials_dir)
        content = load_content(self.config.content_path)
        self.sections = inject_content(partials, content)
        return self.sections

    def build_pages(self):
        self.pages = []
        for filename in sorted(os.listdir(self.config.src_dir)):
            if os.path.splitext(filename)[1] != '.html':
                continue

            with open(os.path.join(self.config.src_dir, filename), 'r', encoding='utf-8') as f:
                shell = f.read()

            html = assemble_page(shell, self.sections, self.css_filename, self.config.strip_prefix)
            with open(os.path.join(self.config.out_dir, filename), 'w', encoding='utf-8') as f:
                f.write(minify_html(html))

            self.pages.append(filename)
            print(f"✅ Built HTML page: {filename}")
        return self.pages

    def generate_sitemap(self):
        write_sitemap(self.config.out_dir, self.config.base_url)
        write_robots(self.config.out_dir, self.config.base_url)


def main():
    builder = SiteBuilder(BuildConfig.from_root(os.getcwd()))
    builder.run()


if __name__ == "__main__":
    main()
