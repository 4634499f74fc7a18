#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Some useful functions for parsing XML file types.

Note we need to name this `xml_reading` so as not to clobber the standard
library package.

"""
from xml.etree.ElementTree import iterparse


def gen_nodes(source, node_names, *, with_root=False):
    """Efficiently iterate over specific nodes of an XML document.

    `source` is a path or a binary file object. Nodes are complete when
    yielded; the root is cleared behind them.

    http://effbot.org/zone/element-iterparse.htm
    """
    context = iter(iterparse(source, events=('start', 'end')))
    event, root = next(context)  # get the root element

    if with_root:
        yield root

    for event, element in context:
        if event == 'end' and sans_ns(element.tag) in node_names:
            yield element
            root.clear()


def sans_ns(tag):
    """Remove the namespace prefix from a tag."""
    return tag.split('}')[-1]


def children(node, name):
    """Direct children of `node` called `name`, whatever their namespace."""
    return [child for child in node if sans_ns(child.tag) == name]


def find_text(node, *path):
    """Text at the end of a path of (namespace-less) tag names, or None."""
    for name in path:
        found = children(node, name)
        if not found:
            return None
        node = found[0]
    return node.text.strip() if node.text else None


def recursive_text_extract(node):
    """{tag: text} for every leaf below `node`, namespaces dropped."""
    leaves = {}
    for element in node.iter():
        if len(element) == 0 and element is not node and element.text:
            leaves[sans_ns(element.tag)] = element.text.strip()
    return leaves
