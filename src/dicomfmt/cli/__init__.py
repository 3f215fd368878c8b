from logging import ERROR, INFO, getLogger
from typing import Any, Callable

import click
from click.decorators import FC


def set_log_verbosity(
	*param_decls: str,
	logger_name: str = 'dicomfmt',
	quiet_decl: tuple = ('--quiet', '-q'),
	**kwargs: Any,  # noqa
) -> Callable[[FC], FC]:
	"""
	Add a `--verbose` flag that lowers the logging level to INFO and a
	`--quiet` flag to suppress all logging except errors.

	The value of `--verbose` is still passed to the command, which threads
	it into the components that log skipped files.

	Parameters
	----------
	*param_decls : str
		Custom names for the verbosity flag.
	logger_name : str
		Name of the logger whose level is adjusted.
	quiet_decl : tuple
		Tuple containing custom names for the quiet flag.
	**kwargs : Any
		Additional keyword arguments for the click option.

	Returns
	-------
	Callable
		The decorated function with verbosity and quiet options.
	"""

	def callback(ctx: click.Context, param: click.Parameter, value: bool) -> bool:
		logger = getLogger(logger_name)
		# `--quiet` is eager, so it is already parsed here
		if ctx.params.get('quiet', False):
			logger.setLevel(ERROR)
			return value
		if value:
			logger.setLevel(min(INFO, logger.getEffectiveLevel()))
		return value

	if not param_decls:
		param_decls = ('--verbose', '-v')

	kwargs.setdefault('is_flag', True)
	kwargs.setdefault(
		'help',
		'Log skipped files and other details, overrides environment variable.',
	)
	kwargs['callback'] = callback

	def decorator(func: FC) -> FC:
		func = click.option(*param_decls, **kwargs)(func)
		func = click.option(
			*quiet_decl,
			is_flag=True,
			is_eager=True,
			help='Suppress all logging except errors, overrides verbosity options.',
		)(func)
		return func

	return decorator
