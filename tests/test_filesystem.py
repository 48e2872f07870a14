#!/usr/bin/env python3
"""
Behavior tests for FileSystem navigation, creation, reading, writing,
removal and search.
"""

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import time

import pytest
from imfs.imfs import FileSystem
from imfs.results import ErrorKind


@pytest.fixture
def fs():
    """Create a fresh FileSystem for each test."""
    return FileSystem()


@pytest.fixture
def populated_fs():
    """A FileSystem with a small directory structure."""
    fs = FileSystem()
    fs.mkdir('/home/user/documents', parents=True)
    fs.mkdir('/home/user/projects/app', parents=True)
    fs.mkdir('/tmp')
    fs.write('/home/user/greeting.txt', 'Hello World')
    fs.write('/home/user/documents/notes.txt', 'Line 1\nLine 2\n')
    fs.write('/tmp/fruits.txt', 'apple\nbanana\n')
    return fs


def assert_unique_names(node):
    """No two children of any directory share a name."""
    for current in node.walk():
        names = [child.name for child in current.children.values()]
        assert len(names) == len(set(names))
        for name, child in current.children.items():
            assert child.name == name
            assert child.parent is current


class TestNavigation:
    """cd, pwd and ls."""

    def test_root_pwd(self, fs):
        assert fs.pwd().data == '/'

    def test_scenario_nested_cd(self, fs):
        assert fs.mkdir('a')
        assert fs.mkdir('a/b', parents=True)
        assert fs.ls('/a').data == ['b']
        assert fs.cd('a/b')
        assert fs.pwd().data == '/a/b'

    def test_path_equivalence(self, populated_fs):
        fs = populated_fs
        fs.cd('/tmp')
        fs.cd('/home/user')
        absolute = fs.cwd

        fs.cd('/')
        fs.cd('home')
        fs.cd('user')
        assert fs.cwd is absolute

    def test_cd_parent_and_root(self, populated_fs):
        fs = populated_fs
        fs.cd('/home/user/documents')
        fs.cd('..')
        assert fs.pwd().data == '/home/user'
        fs.cd('/')
        fs.cd('..')
        assert fs.pwd().data == '/'

    def test_cd_missing_keeps_cwd(self, fs):
        result = fs.cd('nonexistent')
        assert result.error is ErrorKind.NOT_FOUND
        assert fs.cwd is fs.root

    def test_cd_into_file_fails(self, populated_fs):
        result = populated_fs.cd('/tmp/fruits.txt')
        assert result.error is ErrorKind.NOT_A_DIRECTORY
        assert populated_fs.pwd().data == '/'

    def test_cd_empty_path_is_noop(self, fs):
        fs.mkdir('a')
        fs.cd('a')
        assert fs.cd('').error is ErrorKind.INVALID_ARGUMENT
        assert fs.pwd().data == '/a'

    def test_ls_insertion_order(self, fs):
        for name in ['zeta', 'alpha', 'mid']:
            fs.mkdir(name)
        fs.touch('beta')
        assert fs.ls().data == ['zeta', 'alpha', 'mid', 'beta']

    def test_ls_does_not_recurse(self, populated_fs):
        assert populated_fs.ls('/home').data == ['user']

    def test_ls_file(self, populated_fs):
        assert populated_fs.ls('/tmp/fruits.txt').data == ['fruits.txt']

    def test_ls_missing(self, fs):
        assert fs.ls('/nope').error is ErrorKind.NOT_FOUND


class TestMkdir:
    """mkdir including idempotence and parent creation."""

    def test_mkdir_twice_is_idempotent(self, fs):
        assert fs.mkdir('d')
        assert fs.mkdir('d')
        assert fs.ls().data == ['d']

    def test_mkdir_existing_file_is_noop(self, fs):
        fs.write('f', 'data')
        assert fs.mkdir('f')
        assert fs.get('f').is_file()
        assert fs.cat('f').data == b'data'

    def test_mkdir_without_parents_fails(self, fs):
        result = fs.mkdir('/x/y')
        assert result.error is ErrorKind.NOT_FOUND
        assert not fs.exists('/x')

    def test_mkdir_with_parents(self, fs):
        assert fs.mkdir('/deep/nested/dir', parents=True)
        assert fs.get('/deep/nested/dir').is_dir()

    def test_mkdir_through_file_fails(self, fs):
        fs.touch('f')
        result = fs.mkdir('f/sub', parents=True)
        assert result.error is ErrorKind.NOT_A_DIRECTORY
        assert fs.ls().data == ['f']

    def test_mkdir_relative_to_cwd(self, fs):
        fs.mkdir('a')
        fs.cd('a')
        fs.mkdir('b')
        assert fs.exists('/a/b')

    def test_mkdir_empty_name(self, fs):
        assert fs.mkdir('').error is ErrorKind.INVALID_ARGUMENT
        assert fs.ls().data == []


class TestTouch:
    """touch creates files or refreshes timestamps."""

    def test_touch_creates_empty_file(self, fs):
        assert fs.touch('file1.txt')
        node = fs.get('file1.txt')
        assert node.is_file()
        assert node.content == b''

    def test_touch_existing_refreshes_mtime(self, fs):
        fs.write('f', 'keep')
        node = fs.get('f')
        node.modified_at = 0.5
        assert fs.touch('f')
        assert node.modified_at > 0.5
        assert node.content == b'keep'
        assert fs.ls().data == ['f']

    def test_touch_existing_directory(self, fs):
        fs.mkdir('d')
        node = fs.get('d')
        node.modified_at = 0.5
        fs.touch('d')
        assert node.is_dir()
        assert node.modified_at > 0.5

    def test_touch_needs_parent(self, fs):
        assert fs.touch('missing/f').error is ErrorKind.NOT_FOUND


class TestWriteAndRead:
    """write and cat round trips."""

    def test_overwrite_round_trip(self, fs):
        fs.write('p', 'X')
        assert fs.cat('p').data == b'X'

    def test_append(self, fs):
        fs.write('p', 'a', append=True)
        fs.write('p', 'b', append=True)
        assert fs.cat('p').data == b'ab'

    def test_overwrite_replaces(self, fs):
        fs.write('p', 'long content')
        fs.write('p', 'new')
        assert fs.cat('p').data == b'new'

    def test_write_returns_size(self, fs):
        assert fs.write('p', 'abc').data == 3
        assert fs.write('p', 'de', append=True).data == 5
        assert fs.stat('p').data['size'] == 5

    def test_write_bytes(self, fs):
        fs.write('bin', b'\x00\xff')
        assert fs.cat('bin').data == b'\x00\xff'

    def test_write_to_directory_fails(self, fs):
        fs.mkdir('subdir')
        result = fs.write('subdir', 'nope')
        assert result.error is ErrorKind.NOT_A_FILE
        assert fs.get('subdir').content == b''
        assert fs.ls().data == ['subdir']

    def test_write_nested_path(self, populated_fs):
        populated_fs.write('/home/user/projects/app/main.py', 'print(1)')
        assert populated_fs.cat('/home/user/projects/app/main.py').data == b'print(1)'

    def test_write_missing_parent_fails(self, fs):
        assert fs.write('/no/such/file', 'x').error is ErrorKind.NOT_FOUND
        assert fs.ls().data == []

    def test_write_updates_mtime(self, fs):
        fs.write('f', 'a')
        node = fs.get('f')
        node.modified_at = 0.5
        fs.write('f', 'b', append=True)
        assert node.modified_at > 0.5

    def test_read_from_parent_directory(self, populated_fs):
        fs = populated_fs
        fs.cd('/home/user/documents')
        assert fs.cat('../greeting.txt').data == b'Hello World'

    def test_read_missing(self, fs):
        assert fs.cat('nonexistent.txt').error is ErrorKind.NOT_FOUND

    def test_read_directory(self, fs):
        fs.mkdir('testdir')
        assert fs.cat('testdir').error is ErrorKind.NOT_A_FILE

    def test_read_alias(self, fs):
        fs.write('f', 'x')
        assert fs.read('f').data == b'x'


class TestRemove:
    """rm with and without recursion."""

    def test_remove_file(self, fs):
        fs.touch('testfile')
        assert fs.rm('testfile')
        assert fs.ls().data == []

    def test_remove_empty_directory(self, fs):
        fs.mkdir('testdir')
        assert fs.rm('testdir')
        assert not fs.exists('testdir')

    def test_remove_non_empty_needs_recursive(self, populated_fs):
        result = populated_fs.rm('/home')
        assert result.error is ErrorKind.NON_EMPTY_DIRECTORY
        assert populated_fs.exists('/home/user/greeting.txt')

    def test_remove_recursive(self, populated_fs):
        assert populated_fs.rm('/home', recursive=True)
        assert not populated_fs.exists('/home')
        assert populated_fs.ls('/').data == ['tmp']

    def test_remove_missing(self, fs):
        assert fs.rm('nonexistent').error is ErrorKind.NOT_FOUND

    def test_remove_root_rejected(self, fs):
        assert fs.rm('/', recursive=True).error is ErrorKind.INVALID_ARGUMENT
        assert fs.root.is_root()

    def test_remove_ancestor_of_cwd_relocates_cwd(self, populated_fs):
        fs = populated_fs
        fs.cd('/home/user/documents')
        assert fs.rm('/home/user', recursive=True)
        assert fs.pwd().data == '/home'
        assert fs.ls().data == []

    def test_remove_cwd_itself(self, fs):
        fs.mkdir('a')
        fs.cd('a')
        assert fs.rm('.')
        assert fs.cwd is fs.root

    def test_remove_sibling_keeps_cwd(self, populated_fs):
        fs = populated_fs
        fs.cd('/home/user')
        fs.rm('/tmp', recursive=True)
        assert fs.pwd().data == '/home/user'


class TestFind:
    """find is a pre-order search from the root."""

    def test_find_first_preorder_match(self, fs):
        fs.mkdir('a')
        fs.write('a/match-deep', 'x')
        fs.write('match-top', 'y')
        # 'a' is visited and descended into before 'match-top'
        assert fs.find('match').data == '/a/match-deep'

    def test_directory_checked_before_children(self, fs):
        fs.mkdir('/docs/docs-inner', parents=True)
        assert fs.find('docs').data == '/docs'

    def test_find_starts_at_root(self, populated_fs):
        populated_fs.cd('/tmp')
        assert populated_fs.find('notes').data == '/home/user/documents/notes.txt'

    def test_find_is_case_sensitive(self, populated_fs):
        assert populated_fs.find('NOTES').error is ErrorKind.NOT_FOUND

    def test_find_not_found(self, fs):
        assert fs.find('nonexistent.txt').error is ErrorKind.NOT_FOUND

    def test_find_empty_substring(self, fs):
        fs.touch('x')
        assert fs.find('').error is ErrorKind.INVALID_ARGUMENT

    def test_find_is_deterministic(self, populated_fs):
        results = {populated_fs.find('t').data for _ in range(5)}
        assert len(results) == 1


class TestStat:
    """stat and exists."""

    def test_stat_file(self, populated_fs):
        info = populated_fs.stat('/home/user/greeting.txt').data
        assert info['type'] == 'file'
        assert info['size'] == len('Hello World')
        assert info['path'] == '/home/user/greeting.txt'

    def test_stat_directory(self, populated_fs):
        info = populated_fs.stat('/home/user').data
        assert info['type'] == 'dir'
        assert info['children'] == 3

    def test_timestamps(self, fs):
        before = time.time()
        fs.touch('f')
        info = fs.stat('f').data
        assert info['created_at'] >= before
        assert info['modified_at'] >= info['created_at']

    def test_exists(self, populated_fs):
        assert populated_fs.exists('/tmp')
        assert not populated_fs.exists('/var')


def test_tree_invariants_after_operations(populated_fs):
    fs = populated_fs
    fs.mkdir('/tmp')
    fs.touch('/tmp/fruits.txt')
    fs.write('/tmp/fruits.txt', 'cherry', append=True)
    fs.cp('/home/user', '/tmp')
    fs.mv('/tmp/user/greeting.txt', '/tmp/greeting.txt')
    fs.rm('/home/user/projects', recursive=True)

    assert_unique_names(fs.root)
    assert fs.root.name == '/'
    assert fs.root.parent is None
    for node in fs.root.walk():
        if node.is_file():
            assert not node.children
        else:
            assert node.content == b''
