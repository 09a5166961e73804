"""
Upload one file with form fields, e.g.:

    python examples/upload_file.py https://httpbin.org/post dump.dmp \
        -f prod=App -f ver=1.0 --part upload_file_minidump
"""

import click

from formpost import Uploader, UploadError, setup_logging


@click.command()
@click.argument("url")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option("--part", default="upload_file", show_default=True, help="Form field name of the file.")
@click.option("-f", "--field", "fields", multiple=True, help="Form field as name=value.")
@click.option("--timeout", default=10.0, show_default=True, type=float)
@click.option("--insecure", is_flag=True, help="Skip TLS certificate verification.")
def main(url: str, path: str, part: str, fields: tuple[str, ...], timeout: float, insecure: bool) -> None:
    setup_logging()
    parameters: dict[str, str] = {}
    for item in fields:
        name, sep, value = item.partition("=")
        if not sep:
            raise click.BadParameter(f"expected name=value, got {item!r}", param_hint="--field")
        parameters[name] = value

    uploader = Uploader(timeout=timeout, verify=not insecure)
    try:
        result = uploader.upload(url, parameters, path, part)
    except UploadError as exc:
        click.secho(f"Upload failed: {exc}", fg="red", err=True)
        raise SystemExit(1) from exc

    color = "green" if result.ok else "red"
    click.secho(f"Upload status: {result.status_code} {result.reason}", fg=color)
    click.echo(result.text[:200])
    if not result.ok:
        raise SystemExit(1)


if __name__ == "__main__":
    main()
