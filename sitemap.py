import os

SITEMAP_NS = 'http://www.sitemaps.org/schemas/sitemap/0.9'


def list_html_files(out_dir):
    return sorted(f for f in os.listdir(out_dir) if f.endswith('.html'))


def page_route(filename):
    # e.g. index.html -> /, about.html -> /about.html
    if filename == 'index.html':
        return '/'
    return f'/{filename}'


def render_sitemap(base_url, html_files):
    xml_content = ['<?xml version="1.0" encoding="UTF-8"?>']
    xml_content.append(f'<urlset xmlns="{SITEMAP_NS}">')

    for filename in html_files:
        xml_content.append('  <url>')
        xml_content.append(f"    <loc>{base_url}{page_route(filename)}</loc>")
        xml_content.append('  </url>')

    xml_content.append('</urlset>')
    return '\n'.join(xml_content)


def render_robots(base_url):
    return '\n'.join([
        'User-agent: *',
        'Allow: /',
        '',
        f'Sitemap: {base_url}/sitemap.xml',
    ])


def write_sitemap(out_dir, base_url):
    html_files = list_html_files(out_dir)
    with open(os.path.join(out_dir, 'sitemap.xml'), 'w', encoding='utf-8') as f:
        f.write(render_sitemap(base_url, html_files))
    print(f"🗺️ Generated sitemap.xml with {len(html_files)} URLs")
    return html_files


def write_robots(out_dir, base_url):
    with open(os.path.join(out_dir, 'robots.txt'), 'w', encoding='utf-8') as f:
        f.write(render_robots(base_url))
    print("🤖 Generated robots.txt")
