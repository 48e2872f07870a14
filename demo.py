#!/usr/bin/env python3
"""
Demo script showcasing imfs.

This demonstrates:
1. Building a tree with the Python API
2. Moving, copying and removing subtrees
3. Driving the same filesystem through the terminal
"""

from imfs import FileSystem, TerminalConfig, TerminalSession


def demo_python_api():
    """Demonstrate Python API usage."""
    print("=== Python API Demo ===")
    print()

    fs = FileSystem()

    fs.mkdir("/home/user/documents", parents=True)
    fs.write("/home/user/hello.txt", "Hello, World!")
    fs.write("/home/user/documents/note.txt", "Important note")

    print("Directory listing of /home/user:")
    for item in fs.ls("/home/user"):
        stat = fs.stat(f"/home/user/{item}").data
        print(f"  {item:<20} {stat['type']:<10} size={stat['size']}")

    print("\nCopy is independent of its source:")
    fs.cp("/home/user/hello.txt", "/home/user/hello_copy.txt")
    fs.write("/home/user/hello_copy.txt", " (edited)", append=True)
    print(f"  hello.txt:      {fs.cat('/home/user/hello.txt').data.decode()}")
    print(f"  hello_copy.txt: {fs.cat('/home/user/hello_copy.txt').data.decode()}")

    print("\nMove keeps identity, failures change nothing:")
    fs.cd("/home/user/documents")
    fs.mv("/home/user", "/archive")
    print(f"  cwd after moving its ancestor: {fs.pwd().data}")
    result = fs.mv("/archive", "/archive/documents")
    print(f"  moving a directory into itself: {result.error.name}")

    print("\nFirst match in pre-order:")
    print(f"  find('note') -> {fs.find('note').data}")
    print()


def demo_terminal():
    """Demonstrate the terminal front end."""
    print("=== Terminal Demo ===")
    print()

    session = TerminalSession(config=TerminalConfig(enable_colors=False))
    script = [
        "mkdir -p projects/app",
        "echo 'print(42)' > projects/app/main.py",
        "cd projects/app",
        "pwd",
        "ls -l",
        "cat main.py",
        "cd /; rm projects",
        "rm -r projects && ls",
    ]
    for line in script:
        print(f"$ {line}")
        output = session.run_command(line)
        if output:
            print(output)
    print()


if __name__ == "__main__":
    demo_python_api()
    demo_terminal()
