"""
Visibility Validator - Decide whether a located node counts as present.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from element_resolver.interfaces.browser import IElement


VISIBILITY_JS = r'''
el => {
    const style = window.getComputedStyle(el);
    return !!style
        && style.display !== 'none'
        && style.visibility !== 'hidden'
        && style.opacity !== '0';
}
'''


async def is_visible(element: "IElement") -> bool:
    """
    Check the element's computed style.
    
    Only display, visibility and opacity are considered; zero-size or
    off-screen nodes still count as visible.
    """
    return bool(await element.evaluate(VISIBILITY_JS))
