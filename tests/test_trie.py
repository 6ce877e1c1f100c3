from lox.trie import SymbolTrie


def test_find_and_contains():
    trie = SymbolTrie(['=', '==', '!='])
    assert trie.find('==') == '=='
    assert '!=' in trie
    # "!" is only a prefix here
    assert '!' not in trie
    assert trie.find('===') is None


def test_add_with_custom_value():
    trie = SymbolTrie()
    trie.add('<>', 'not-equal')
    assert trie.find('<>') == 'not-equal'
    assert trie.child('<').value is None


def test_remove_collapses_empty_branches():
    trie = SymbolTrie(['<', '<<<'])
    trie.remove('<<<')
    assert '<<<' not in trie
    assert '<' in trie
    assert trie.child('<').children == {}


def test_remove_keeps_shared_prefixes():
    trie = SymbolTrie(['<<', '<<<'])
    trie.remove('<<<')
    assert '<<' in trie
    assert trie.child('<').child('<').children == {}


def test_remove_last_symbol_empties_root():
    trie = SymbolTrie(['->'])
    trie.remove('->')
    assert trie.children == {}


def test_remove_unknown_symbol_is_a_no_op():
    trie = SymbolTrie(['+'])
    trie.remove('++')
    trie.remove('')
    assert '+' in trie
