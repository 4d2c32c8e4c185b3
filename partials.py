"""
Partial loading and content injection.

Fragments are plain immutable strings. Every helper returns a new string and
inject_content() returns a new mapping, so a fragment is only ever resolved
from its pristine source and embedded once its own placeholders are filled.
"""
import json
import os

from buildlog import warn

PARTIAL_NAMES = [
    'head',
    'headerHTML',
    'heroSection',
    'invoices',
    'aboutSection',
    'steps',
    'servicesSection',
    'services',
    'contactSection',
    'contactForm',
    'footerHTML',
]

# Dotted paths that must exist in copy.json, with the type expected there.
REQUIRED_FIELDS = {
    'header.nav': list,
    'hero.title': str,
    'hero.description': str,
    'hero.cta': str,
    'invoices.label': str,
    'invoices.amounts': list,
    'about.title': str,
    'about.description': str,
    'about.steps': list,
    'services.title': str,
    'services.description': str,
    'services.list': list,
    'contact.title': str,
    'contact.description': str,
}

# Keys each entry of a list field must carry.
REQUIRED_ITEM_KEYS = {
    'header.nav': ('label', 'link'),
    'about.steps': ('title', 'description'),
    'services.list': ('title', 'description'),
}


class ContentError(ValueError):
    """Raised when the content document lacks a field the partials need."""


def partial_filename(name):
    return name.replace('HTML', '') + '.html'


def load_partials(partials_dir, names=PARTIAL_NAMES):
    partials = {}
    for name in names:
        path = os.path.join(partials_dir, partial_filename(name))
        with open(path, 'r', encoding='utf-8') as f:
            partials[name] = f.read()
    print("🧩 Loaded HTML partials")
    return partials


def lookup(doc, dotted):
    node = doc
    for key in dotted.split('.'):
        if not isinstance(node, dict) or key not in node:
            raise ContentError(f"Missing content field: '{dotted}'")
        node = node[key]
    return node


def validate_content(doc):
    for dotted, expected in REQUIRED_FIELDS.items():
        value = lookup(doc, dotted)
        if not isinstance(value, expected):
            raise ContentError(
                f"Content field '{dotted}' should be a {expected.__name__}, got {type(value).__name__}"
            )

    for dotted, keys in REQUIRED_ITEM_KEYS.items():
        for i, item in enumerate(lookup(doc, dotted)):
            for key in keys:
                if not isinstance(item, dict) or key not in item:
                    raise ContentError(f"Missing content field: '{dotted}[{i}].{key}'")


def load_content(path):
    with open(path, 'r', encoding='utf-8') as f:
        doc = json.load(f)
    validate_content(doc)
    print("📖 Loaded site copy from copy.json")
    return doc


def placeholder(name):
    return '{{' + name + '}}'


def replace_first(fragment, name, value):
    return fragment.replace(placeholder(name), str(value), 1)


def replace_all(fragment, name, value):
    return fragment.replace(placeholder(name), str(value))


def fill(fragment, values):
    """First-occurrence replacement of every placeholder in values, in order."""
    for name, value in values.items():
        fragment = replace_first(fragment, name, value)
    return fragment


def replace_each(fragment, items):
    """
    Repeated substitution: each mapping in items fills the next free
    occurrence of its placeholders, in list order.

    Items left over once the markers run out are dropped with a warning.
    Markers left over once the items run out stay in the fragment.
    """
    for index, values in enumerate(items):
        markers = [placeholder(name) for name in values]
        if not any(marker in fragment for marker in markers):
            dropped = len(items) - index
            warn(f"No marker left for {', '.join(markers)}: dropped {dropped} extra value(s)")
            break
        fragment = fill(fragment, values)
    return fragment


def embed(parent, marker, child):
    """Replace the <!-- marker --> comment in parent with child."""
    return parent.replace(f"<!-- {marker} -->", child, 1)


def inject_content(partials, content):
    """
    Resolve every section partial against the content document.

    Returns a new dict keyed by section (head, header, hero, about,
    services, contact, footer); partials itself is left untouched.
    """
    header = replace_each(
        partials['headerHTML'],
        [{'LABEL': item['label'], 'DESTINATION': item['link']} for item in content['header']['nav']],
    )

    hero = content['hero']
    invoices = content['invoices']
    invoices_html = replace_all(partials['invoices'], 'LABEL', invoices['label'])
    invoices_html = replace_each(invoices_html, [{'AMOUNT': amount} for amount in invoices['amounts']])
    hero_html = fill(partials['heroSection'], {
        'TITLE': hero['title'],
        'DESCRIPTION': hero['description'],
        'CTA': hero['cta'],
    })
    hero_html = embed(hero_html, 'INVOICES', invoices_html)

    about = content['about']
    steps_html = replace_each(
        partials['steps'],
        [{'TITLE': step['title'], 'DESCRIPTION': step['description']} for step in about['steps']],
    )
    about_html = fill(partials['aboutSection'], {'TITLE': about['title'], 'DESCRIPTION': about['description']})
    about_html = embed(about_html, 'STEPS', steps_html)

    services = content['services']
    services_html = replace_each(
        partials['services'],
        [{'TITLE': service['title'], 'DESCRIPTION': service['description']} for service in services['list']],
    )
    services_section = fill(partials['servicesSection'], {
        'TITLE': services['title'],
        'DESCRIPTION': services['description'],
    })
    services_section = embed(services_section, 'SERVICES', services_html)

    contact = content['contact']
    contact_html = fill(partials['contactSection'], {'TITLE': contact['title'], 'DESCRIPTION': contact['description']})
    contact_html = embed(contact_html, 'CONTACT FORM', partials['contactForm'])

    print("🔧 Injected dynamic content into partials")
    return {
        'head': partials['head'],
        'header': header,
        'hero': hero_html,
        'about': about_html,
        'services': services_section,
        'contact': contact_html,
        'footer': partials['footerHTML'],
    }
